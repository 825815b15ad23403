from setuptools import setup, find_packages

setup(
    name='rbmgrad',
    version='0.1dev',
    packages=find_packages(include=['rbmgrad', 'rbmgrad.*']),
    description='Contrastive divergence gradient estimation for binary '
                'Restricted Boltzmann Machines.',
    license='BSD 3-clause license',
    long_description=open('README.rst').read(),
    install_requires=['numpy>=1.5'],
    extras_require={'test': ['pytest']},
)
