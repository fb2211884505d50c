import re

from setuptools import setup, find_packages


with open("README.md", "r") as fh:
    long_description = fh.read()


with open("requirements.txt") as f:
    requirements = f.read().splitlines()


# read the version without importing the package and its dependencies
with open("refwalker/__init__.py") as f:
    version = re.search(r'^__version__ = "(.+)"$', f.read(), re.M).group(1)


description = (
    "Find the attribute and item paths through which Python objects are "
    "reachable"
)


setup(
    name="refwalker",
    version=version,
    packages=find_packages(where=".", include=["refwalker", "refwalker.*"]),
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
        "docs": [
            "sphinx",
            "sphinx-automodapi",
            "sphinx-book-theme",
            "sphinx-copybutton",
            "myst-parser",
        ],
    },
    entry_points={
        "console_scripts": [
            "refwalker=refwalker.__main__:main",
        ],
    },
    description=description,
    long_description=long_description,
    long_description_content_type="text/markdown",
)
