# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="ldapui-core",
    version="1.0.0",
    description="Client-side tree cache and schema-driven entry model for an LDAP directory browser",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["ldapui*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'ldapui=ldapui.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
