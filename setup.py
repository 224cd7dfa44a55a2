from setuptools import setup, find_packages

setup(
    name="keychat",
    version="0.1.0",
    description="Minimal API-key authenticated messaging backend",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "fastapi==0.116.1",
        "uvicorn[standard]==0.35.0",
        "sqlalchemy==2.0.42",
        "aiosqlite==0.21.0",
        "asyncpg==0.30.0",
        "dishka==1.6.0",
        "environs==14.2.0",
        "pydantic==2.11.7",
        "python-multipart==0.0.20"
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "httpx>=0.27"
        ]
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "keychat-api=keychat.main:main"
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
