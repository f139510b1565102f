from setuptools import find_packages, setup


extras_require = {}

extras_require["test"] = [
    'pytest>=7.4,<9.0',
    'pytest-mock>=3.12,<4.0',
]

extras_require["all"] = [
    *extras_require["test"],
]


setup(
    name='orgflow',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    license='MIT',
    description='Organization lifecycle workflows: provisioning, invites, ownership and quotas',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    install_requires=[
        'boto3>=1.28.55',
        'python-dotenv>=1.0.0,<2.0',
        'python-dateutil>=2.8.2,<3.0',
        'pydantic>=2.5,<3.0',
        'pydantic-settings>=2.1,<3.0',
        'psycopg2-binary>=2.9.10,<3.0',
        'clickhouse-connect>=0.7,<1.0',
        'pika>=1.3.2,<1.4',
        'requests>=2.31.0,<3.0',
    ],
    extras_require=extras_require,
    python_requires=">=3.10"
)
