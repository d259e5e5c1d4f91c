#!/usr/bin/env python

# Support setuptools only, distutils has a divergent and more annoying API and
# few folks will lack setuptools.
from setuptools import setup, find_packages

# Version info -- read without importing
_locals = {}
with open("staticflow/_version.py") as fp:
    exec(fp.read(), None, _locals)
version = _locals["__version__"]

exclude = ["tests", "tests.*"]

# Frankenstein long_description
long_description = """
{}

Pipelines are plain invoke task modules named ``pipeline.py``; two are
bundled (``--variant minimal``, the default, and ``--variant extended``).
""".format(
    open("README.rst").read()
)


setup(
    name="staticflow",
    version=version,
    description="Task-driven static asset pipeline with fingerprinting and a dev server",  # noqa
    license="BSD",
    long_description=long_description,
    python_requires=">=3.8",
    packages=find_packages(exclude=exclude),
    include_package_data=True,
    install_requires=[
        "invoke>=2.0",
        "watchdog>=2.1",
        "werkzeug>=2.2",
    ],
    extras_require={
        "test": ["pytest>=7", "pytest-relaxed>=2"],
    },
    entry_points={
        "console_scripts": [
            "staticflow = staticflow.main:program.run",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Environment :: Web Environment",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: POSIX",
        "Operating System :: Unix",
        "Operating System :: MacOS :: MacOS X",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Software Development",
        "Topic :: Software Development :: Build Tools",
        "Topic :: Internet :: WWW/HTTP :: Site Management",
    ],
)
