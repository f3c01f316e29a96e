from setuptools import setup, find_packages

setup(
    name='homefeed',
    version='0.1.0',
    description='Personalized home feed recommendations for a music player',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    author='',
    author_email='',
    license='MIT',
    platforms='ALL',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.10',
    install_requires=[
        'pydantic>=2.0.0',
        'pydantic-settings>=2.0.0',
        'python-dateutil',
        'PyYAML',
        'typer',
        'rich',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'homefeed=homefeed.cli:main',
        ],
    },
)
