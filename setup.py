from pathlib import Path
from setuptools import setup, find_packages


def read_readme() -> str:
    readme_path = Path(__file__).resolve().parent / "README.md"
    return readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""


setup(
    name="wbzconv",
    version="0.3.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "numpy>=1.24.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["wbzconv=wbzconv.cli:main"],
    },
    python_requires=">=3.10",
    description="Convert Mario Kart Wii WBZ/WU8 archives to U8 and back",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
)
