import setuptools

setuptools.setup(
    name = 'bezfit',
    version = '1.0',
    description = 'Bezier curve fitting tools',
    packages = setuptools.find_packages(exclude=['tests']),
    python_requires = '>=3.7',
    install_requires=['numpy', 'scipy'],
    extras_require={'test': ['pytest']},
)
