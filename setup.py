# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from setuptools import setup, find_packages

VERSION = (1, 0, 0)
__version__ = '.'.join(map(str, VERSION[0:3]))
__description__ = '''SOCKS5 relay proxy with source and destination IP allow-lists,
    listening locally or on a remote host through an SSH reverse tunnel.'''
__author__ = 'Abhinav Singh'
__author_email__ = 'mailsforabhinav@gmail.com'
__license__ = 'BSD'

if __name__ == '__main__':
    setup(
        name='socksrelay',
        version=__version__,
        author=__author__,
        author_email=__author_email__,
        description=__description__,
        long_description=open(
            'README.md', 'r', encoding='utf-8').read().strip(),
        long_description_content_type='text/markdown',
        license=__license__,
        python_requires='>=3.8',
        zip_safe=False,
        packages=find_packages(exclude=['tests', 'tests.*']),
        package_data={'socksrelay': ['py.typed']},
        install_requires=open('requirements.txt', 'r').read().strip().split(),
        extras_require={
            'testing': open('requirements-testing.txt', 'r').read().strip().split(),
        },
        entry_points={
            'console_scripts': [
                'socksrelay = socksrelay:entry_point'
            ]
        },
        classifiers=[
            'Development Status :: 4 - Beta',
            'Environment :: Console',
            'Environment :: No Input/Output (Daemon)',
            'Intended Audience :: Developers',
            'Intended Audience :: System Administrators',
            'License :: OSI Approved :: BSD License',
            'Natural Language :: English',
            'Operating System :: MacOS :: MacOS X',
            'Operating System :: POSIX :: Linux',
            'Operating System :: Microsoft :: Windows',
            'Programming Language :: Python :: 3 :: Only',
            'Programming Language :: Python :: 3',
            'Topic :: Internet',
            'Topic :: Internet :: Proxy Servers',
            'Topic :: System :: Networking',
            'Topic :: System :: Networking :: Firewalls',
            'Topic :: Utilities',
            'Typing :: Typed',
        ],
        keywords=(
            'socks, socks5, socks proxy, proxy server, ssh tunnel,'
            'reverse tunnel, remote port forwarding, Python3'
        )
    )
