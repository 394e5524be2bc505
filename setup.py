from setuptools import setup, find_packages

setup(
    name="uiauto-selenium",
    version="1.0.0",
    packages=find_packages(include=["uiauto_selenium", "uiauto_selenium.*"]),
    install_requires=[
        "selenium>=4.10",
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    package_data={
        "uiauto_selenium": ["schemas/*.json"],
    },
)
