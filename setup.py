from setuptools import setup, find_packages

setup(name='ecogibbs',
    version='0.0',
    description='Dirichlet process Gibbs sampler for ecological inference in 2x2 tables.',
    license='GNU',
    packages=find_packages(include=['ecogibbs','ecogibbs.*']),
    python_requires='>=3.8',
    install_requires=['numpy',
                      'scipy',
                      'tqdm'],
    extras_require={'test': ['pytest']}
    )
