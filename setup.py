# setup.py
from setuptools import setup, find_packages

setup(
    name="txview",
    version="0.1.0",
    description="Filter, sort, page and export blockchain transactions from a REST API",
    packages=find_packages(include=["transaction_view", "transaction_view.*"]),
    python_requires=">=3.8",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "pandas>=1.1",
        "openpyxl>=3.0",
        "xlsxwriter>=3.0",
        "python-dotenv>=0.19",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "txview=transaction_view.cli:main",
            "txview-web=transaction_view.web:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
