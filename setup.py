import re
from pathlib import Path
from setuptools import setup, find_packages


def get_version():
    init_file = Path(__file__).parent / 'coinfeed' / '__init__.py'
    content = init_file.read_text(encoding='utf-8')
    match = re.search(r'^__version__\s*=\s*["\']([^"\']+)["\']', content, re.M)
    return match.group(1) if match else '0.0.0'


setup(
    name='coinfeed',
    version=get_version(),
    author='coinfeed contributors',
    description='Aggregated cryptocurrency spot-market data from Binance, CoinGecko, CryptoCompare and CoinMarketCap.',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(include=['coinfeed', 'coinfeed.*']),
    install_requires=[
        'requests>=2.25.0',
        'pandas>=2.0.0,<3.0.0',
        'rich>=13.0.0',
        'mcp>=1.2.0,<2',
        'fastapi>=0.100.0',
        'uvicorn>=0.20.0',
        'pydantic>=2.0.0',
        'pydantic-settings>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
            'httpx>=0.24.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'coinfeed-server=coinfeed.server:main',
            'coinfeed-mcp=coinfeed.mcp_server:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Financial and Insurance Industry',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Topic :: Office/Business :: Financial',
        'Topic :: Office/Business :: Financial :: Investment',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    python_requires='>=3.10',
)
