# setup.py
from setuptools import find_packages, setup

setup(
    name="madrasah-helpdesk",
    version="0.1.0",
    packages=find_packages(include=["helpdesk", "helpdesk.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.29",
        "sqlalchemy[asyncio]>=2.0",
        "asyncpg>=0.29",
        "psycopg[binary]>=3.1",
        "alembic>=1.13",
        "pydantic>=2.6",
        "pydantic-settings>=2.2",
        "email-validator>=2.1",
        "structlog>=24.1",
        "sentry-sdk>=1.40",
        "limits>=3.10",
        "bcrypt>=4.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
            "aiosqlite>=0.20",
            "python-dotenv>=1.0",
        ],
    },
)
