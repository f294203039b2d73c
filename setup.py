import setuptools

setuptools.setup(
    name="site-infra",
    version="0.0.1",

    description="CDK Python app for the elchung.com build pipeline and static site hosting",
    author="author",

    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),

    install_requires=[
        "aws-cdk-lib>=2.160.0",
        "constructs>=10.0.0,<11.0.0",
    ],

    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },

    python_requires=">=3.8",

    classifiers=[
        "Development Status :: 4 - Beta",

        "Intended Audience :: Developers",

        "Programming Language :: JavaScript",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",

        "Topic :: Software Development :: Code Generators",
        "Topic :: Utilities",

        "Typing :: Typed",
    ],
)
