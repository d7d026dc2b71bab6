from setuptools import setup, find_packages
import re

# Read version from esopcalc/__init__.py
with open('esopcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='esop-calc',
    version=version,
    packages=find_packages(include=['esopcalc', 'esopcalc.*']),
    package_data={
        'esopcalc': ['tax_rules/*.yaml'],
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
            'esop-calc=esopcalc.cli.__main__:main',
            'esop-calc-mcp=esopcalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='India/US ESOP and US/California household income tax calculators.',
    python_requires='>=3.10',
)
