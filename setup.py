import os
from setuptools import setup, find_packages

subpackages = find_packages("validator_economics")
packages = ["validator_economics"] + ["validator_economics." + p for p in subpackages]


def read_requirements(filename):
    with open(filename, "r") as f:
        return [line.strip() for line in f.readlines() if line.strip()]


setup(
    name="validator_economics",
    version="0.3.0",
    packages=packages,
    package_dir={"validator_economics": "validator_economics"},
    include_package_data=True,
    data_files=[
        (
            os.path.join(
                "lib", "python{0}.{1}".format(*os.sys.version_info[:2]), "site-packages"
            ),
            ["logging.conf"],
        ),
    ],
    python_requires=">=3.10",
    install_requires=read_requirements("requirements.txt"),
    extras_require={"test": read_requirements("requirements-test.txt")},
)
