from setuptools import find_packages, setup

package_name = 'frontier_exploration'

setup(
    name=package_name,
    version='1.0.0',
    packages=find_packages(exclude=['test']),
    python_requires='>=3.8',
    install_requires=[
        'setuptools',
        'numpy',
        'scipy',
        'pyyaml',
    ],
    zip_safe=True,
    maintainer='Drobot Team',
    maintainer_email='drobot@example.com',
    description='Frontier detection and ranking for multi-robot exploration',
    license='Apache-2.0',
    extras_require={
        'test': ['pytest'],
    },
)
