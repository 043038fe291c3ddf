from setuptools import setup, find_packages
import re

# Read version from arrearcalc/__init__.py
with open('arrearcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='arrearcalc',
    version=version,
    packages=find_packages(include=['arrearcalc', 'arrearcalc.*']),
    package_data={
        'arrearcalc': ['data/*.yaml'],
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
            'arrear-calc=arrearcalc.cli.__main__:main',
            'arrear-calc-mcp=arrearcalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Pay arrear calculation for revised government pay scales.',
    python_requires='>=3.10',
)
