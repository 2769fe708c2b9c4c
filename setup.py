import os

from setuptools import setup

# find absolute path of this module
root = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(root, 'requirements.txt')) as f:
    requirements = f.read().splitlines()

# Define the setup parameters
setup(
    name='pftrack',
    version='1.0',
    description='Visual object tracking with a histogram-driven particle filter',
    package_dir={'': 'src'},
    packages=['pftrack'],
    install_requires=requirements,
    extras_require={
        'test': ['pytest']
    },
    entry_points={
        'console_scripts': [
            'pftrack = pftrack.app:main'
        ]
    }
)
