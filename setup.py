from pathlib import Path
from setuptools import find_packages, setup

HERE = Path(__file__).parent


def _read_version() -> str:
    for line in (HERE / "src" / "urlf" / "__init__.py").read_text(encoding="utf-8").splitlines():
        if line.startswith("__version__"):
            return line.split("=", 1)[1].strip().strip("'\"")
    raise RuntimeError("__version__ not found in src/urlf/__init__.py")


setup(
    name="urlf",
    version=_read_version(),
    description="Build correctly escaped URLs from printf-style templates",
    author="urlf contributors",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[],
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["urlf = urlf.cli:main"]},
)
