from setuptools import setup, find_packages

with open('requirements.txt') as f:
    requirements = f.readlines()

setup(
    name='sdwsn',
    version='1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    description='Software defined wireless sensor network stack (SDN-WISE protocol)',
    install_requires=requirements,
    extras_require={'test': ['pytest']},
    entry_points=dict(console_scripts=[
        'sdwsn=sdwsn.main:main'
    ])
)
