# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="sloth",
    version="0.3.0",
    description="A small Lisp: special forms, non-hygienic macros, case-lambda, lazy pairs and catchable errors",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["sloth", "sloth.*", "sloth_lsp", "sloth_lsp.*"]),
    package_data={"sloth": ["prelude/*.lisp"]},
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol>=2023.0.0",
    ],
    extras_require={
        "test": ["pytest>=7", "hypothesis>=6"],
    },
    entry_points={
        "console_scripts": [
            "sloth=sloth.repl:main",
            "sloth-ls=sloth_lsp.server:main",
            "sloth-repl-server=sloth_lsp.repl_server:main",
        ],
    },
    zip_safe=False,
)
