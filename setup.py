import setuptools

import staffio

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name=staffio.__name__,
    version=staffio.__version__,
    author=staffio.__author__,
    author_email=staffio.__email__,
    description="Validated employee records",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=["staffio", "staffio.fields"],
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    extras_require={
        "test": ["pytest", "pytest-cov", "pytest-xdist"],
    },
    python_requires=">=3.7",
)
