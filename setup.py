"""Package setup for stream_audit."""

from setuptools import setup, find_packages

setup(
    name="stream-audit",
    version="1.0.0",
    description="Find SharePoint pages that still embed Microsoft Stream (Classic) videos",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "urllib3>=2.0.0",
        "tqdm>=4.66.0",
        "colorlog>=6.8.0",
        "azure-core>=1.29.0",
        "azure-identity>=1.15.0",
        "azure-mgmt-storage>=21.0.0",
        "azure-storage-blob>=12.19.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "stream-audit=stream_audit.cli:main",
            "stream-audit-merge=stream_audit.cli:merge_main",
        ],
    },
)
