from setuptools import find_packages, setup

setup(
    name="minigit",
    version="0.1.0",
    packages=find_packages(include=["minigit", "minigit.*"]),
    entry_points={
        "console_scripts": [
            "minigit=minigit.cli:main",
        ],
    },
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest>=7"],
    },
    description="minigit: a minimal local version-control system",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Version Control",
        "Programming Language :: Python :: 3.12",
    ],
)
