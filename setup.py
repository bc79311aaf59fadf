from setuptools import find_packages, setup

setup(
    name="vault-to-ssm",
    version="0.1.0",
    packages=find_packages(exclude=["vault_to_ssm_tests", "vault_to_ssm_tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "hvac>=1.1",
        "boto3",
        "botocore",
        "pydantic>=2",
        "tenacity>=8",
        "requests",
        "python-dotenv",
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={
        "console_scripts": [
            "vault-to-ssm=vault_to_ssm.migration.migrate:main",
        ],
    },
)
