from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent.resolve()

setup(
    name="gbmatrix",
    version="0.1.0",
    description="Staged dataset container for GPU gradient boosting",
    long_description=(ROOT / "DESIGN.md").read_text(encoding="utf-8") if (ROOT / "DESIGN.md").exists() else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["gbmatrix", "gbmatrix.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
        "torch>=2.0",
        "joblib>=1.2",
    ],
    extras_require={
        "test": ["pytest>=7", "pandas>=1.5"],
    },
)
