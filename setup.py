from setuptools import setup, find_packages

setup(
    name             = 'autojournal',
    version          = '1.0.0',
    description      = 'autojournal — iMessage transcripts to a contact-resolved daily journal',
    author           = 'autojournal contributors',
    packages         = find_packages(exclude=['tests*']),
    install_requires = open('requirements.txt').read().splitlines(),
    extras_require   = {
        'test': ['pytest', 'httpx'],
    },
    entry_points     = {
        'console_scripts': [
            'autojournal = autojournal.cli:main',
        ],
    },
    python_requires  = '>=3.10',
    classifiers      = [
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
