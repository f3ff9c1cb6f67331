from setuptools import setup, find_packages
import re

# Read version from payplan/__init__.py
with open('payplan/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='payplan',
    version=version,
    packages=find_packages(include=['payplan', 'payplan.*']),
    package_data={
        'payplan.sdk.taxes': ['tax-rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'pay-plan=payplan.cli.__main__:main',
            'pay-plan-mcp=payplan.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Household take-home pay and contribution room estimates.',
    python_requires='>=3.10',
)
