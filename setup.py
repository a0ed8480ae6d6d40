import os
from setuptools import find_namespace_packages, setup

with open("README.md") as readme_file:
    readme = readme_file.read()

this = os.path.dirname(os.path.realpath(__file__))


def read(name):
    with open(os.path.join(this, name)) as f:
        return f.read()

VERSION = "0.3.0"


setup(
    name="auto-refreshrate",
    version=VERSION,
    description="Automatic display refresh rate switcher for Linux laptops on AC/battery",
    long_description=readme,
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["auto_refreshrate", "auto_refreshrate.*"]),
    install_requires=read("requirements.txt").splitlines(),
    extras_require={"test": ["pytest"]},
    python_requires=">=3.10",
    include_package_data=True,
    zip_safe=True,
    license="GPLv3",
    keywords="linux display refresh rate power battery gnome mutter",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Operating System :: POSIX :: Linux",
        "Environment :: Console",
        "Natural Language :: English",
    ],
    entry_points={
        "console_scripts": [
            "auto-refreshrate = auto_refreshrate.bin.auto_refreshrate:main",
        ],
    },
)
