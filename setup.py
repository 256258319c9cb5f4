import os

from setuptools import find_packages, setup

_here = os.path.dirname(os.path.abspath(__file__))
_about: dict = {}
with open(os.path.join(_here, "src", "siwecrypto", "__about__.py")) as f:
    exec(f.read(), _about)

if __name__ == "__main__":
    setup(
        name="siwecrypto",
        version=_about["__version__"],
        description="Sign-In With Ethereum verification with first-principles cryptography",
        packages=find_packages(where="src"),
        package_dir={"": "src"},
        python_requires=">=3.9",
        install_requires=[
            "python-dotenv>=1.0",
        ],
        extras_require={
            "test": [
                "pytest>=7",
                "eth-account>=0.10",
                "pycryptodome>=3.15",
            ],
        },
        entry_points={
            "console_scripts": [
                "siwecrypto=siwecrypto.cli:main",
            ],
        },
    )
