#package configuration file
#!/usr/bin/env python3
from setuptools import setup
setup(
    name='snapgit',
    version='1.0',
    packages=['snapgit'],
    python_requires='>=3.9',
    install_requires=[
        'loguru',
        'pydantic>=2',
        'pydantic-settings>=2',
    ],
    extras_require={
        'test': [
            'pytest',
            'hypothesis',
        ]
    },
    entry_points={
        'console_scripts':[
            'snapgit=snapgit.cli:main'
        ]
    }
)
