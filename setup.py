"""
Setup script for mkgodef

Pure Python package; the Jinja2 templates under mkgodef/templates/ are
shipped as package data so PackageLoader finds them once installed.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from mkgodef/__init__.py
def get_version():
    version_file = Path("mkgodef/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="mkgodef",
    version=get_version(),
    description="Generate cgo -godefs input files from C headers",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["mkgodef", "mkgodef.*"]),
    package_data={"mkgodef": ["templates/*.j2"]},
    python_requires=">=3.9",
    install_requires=[
        "libclang>=16.0",
        "Jinja2>=3.0",
        "tomli>=1.1; python_version < '3.11'",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "mkgodef=mkgodef.cli:main",
        ],
    },
    zip_safe=False,  # Templates are read from the package directory
)
