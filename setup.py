"""
Setup script for the monthly lesson scheduler.
"""
from setuptools import setup, find_packages

setup(
    name="lesson-scheduler",
    version="0.1.0",
    description="Monthly lesson slot scheduling tools",
    author="Optimo MSIS",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.22.0",
        "pandas>=1.4.0",
        "flask>=2.2.0",
        "flask-cors>=3.0.0",
        "werkzeug>=2.0.0",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=2.0.0",
            "black>=22.0.0",
            "mypy>=0.900"
        ],
    },
    entry_points={
        "console_scripts": [
            "lesson-scheduler=main:main",
        ],
    },
)
