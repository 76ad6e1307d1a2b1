from setuptools import setup, find_packages

setup(
    name="relaychat",
    version="1.0.0",
    description="Minimal multi-user UDP chat relay and command-line participant",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "colorama",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "relaychat = relaychat.__main__:main",
            "relaychat-server = relaychat.server:main",
            "relaychat-client = relaychat.client:main",
        ],
    },
    python_requires=">=3.10",
)
