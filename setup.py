# setup.py
from setuptools import setup, find_packages

setup(
    name="exprtree",
    version="0.1.0",
    description="Code-as-data expression trees: walking, call standardization and quasiquotation",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
