from setuptools import setup

setup(
    name="jast",
    version="0.1.0",
    description="Tree-walking interpreter for programs written as a JSON AST",
    py_modules=["jast"],
    python_requires=">=3.10",
    install_requires=["frozendict>=2.3"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["jast=jast:main"]},
)
