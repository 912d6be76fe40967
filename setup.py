"""Install the login-auth package."""

from setuptools import setup, find_packages

setup(
    name='login-auth',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    install_requires=[
        "pyjwt[crypto]",
        "cryptography",
        "sqlalchemy>=1.4",
        "pydantic>=2",
        "flask>=2.3",
        "pytz",
        "python-json-logger",
        "click",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "generate-token=login_auth.generate_token:generate_token",
            "generate-keys=login_auth.generate_token:generate_keys",
        ],
    },
    zip_safe=False
)
