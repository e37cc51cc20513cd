# setup.py
from setuptools import setup, find_packages

setup(
    name="calcvm",
    version="0.1.0",
    description="Tree-walking interpreter for a small integer language with closures",
    packages=find_packages(include=["calcvm", "calcvm.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["calcvm=calcvm.cli:main"],
    },
    zip_safe=False,
)
