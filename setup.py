from setuptools import setup, find_packages

setup(
    name="jive-client-kit",
    version="0.1.0",
    packages=find_packages(),
    install_requires=[
        "httpx",
        "pydantic>=2",
        "pymongo>=4.10",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio",
        ]
    },
    author="Jive Add-on Team",
    author_email="",
    description="Client SDK for Jive add-on services",
    long_description="Client kit for Jive add-on services: community registration, signature validation, OAuth token exchange and refresh, authenticated requests to communities",
    long_description_content_type="text/markdown",
    url="",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
