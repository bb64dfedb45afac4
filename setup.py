#!/usr/bin/env python

from setuptools import setup

setup(
    name="bucketstore",
    version="0.1.0",
    description="Authenticated per-user file storage in buckets over HTTP",
    packages=["bucketstore", "bucketstore.api", "bucketstore.storage"],
    include_package_data=True,
    zip_safe=False,
    python_requires=">=3.10",
    keywords=["API", "storage", "files"],
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    ],
    install_requires=[
        "fastapi[all]",
        "python-multipart",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "uvicorn",
        "pathvalidate",
    ],
    extras_require={
        'dev': [
            'pytest',
            'anyio',
            'httpx',
            'mypy',
            'flake8',
            'pre-commit',
        ]
    },
    entry_points={
        'console_scripts': [
            'bucketstore = bucketstore.__main__:main'
        ]
    },
)
