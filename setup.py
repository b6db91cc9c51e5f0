# noqa: D100
import os
from typing import List

from setuptools import find_packages, setup

_pkg: str = "smkit"
_ghrepo: str = f"{_pkg}-package"


def read(fname):
    """Read content on file name."""
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()


# Declare minimal set for installation
required_packages: List[str] = [
    "boto3>=1.26",
    "botocore>=1.29",
    "s3fs",
    "numpy",
    "pandas",
    "protobuf>=4.22",
    "scipy",
    "loguru",
]

# Specific use case dependencies
extras = {
    "test": ["pytest"],
    "typing": ["boto3-stubs[sagemaker,s3,logs,cloudwatch,sts,iam]"],
}
all_deps = list(required_packages)
for extra in extras.values():
    all_deps.extend(extra)
extras["all"] = all_deps

setup(
    name=_pkg,
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={_pkg: ["image_uri_config/*.json"]},
    version=read("VERSION").strip(),
    description="Thin, validated client objects over the Amazon SageMaker API.",
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    author="Verdi March",
    author_email="first.last@email.com",
    url=f"https://github.com/aws-samples/{_ghrepo}/",
    download_url="",
    project_urls={
        "Bug Tracker": f"https://github.com/aws-samples/{_ghrepo}/issues/",
        "Source Code": f"https://github.com/aws-samples/{_ghrepo}/",
    },
    license="MIT",
    keywords="AWS Amazon SageMaker estimator tuning model-monitor lineage",
    platforms=["any"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8.0",
    install_requires=required_packages,
    extras_require=extras,
    include_package_data=True,
)
