"""
Setup script for the keypoint detector and descriptor benchmark.
"""

from setuptools import setup, find_packages
import os


def read_readme():
    """Read README file for long description."""
    if os.path.exists('README.md'):
        with open('README.md', 'r', encoding='utf-8') as f:
            return f.read()
    return "Keypoint detector and descriptor benchmark on camera image sequences"


# Core requirements (always installed)
install_requires = [
    'opencv-contrib-python>=4.5.0,<5',
    'numpy>=1.19.0',
    'matplotlib>=3.3.0',
    'pandas>=1.2.0',
]

# Optional dependencies for different use cases
extras_require = {
    'dev': [
        'pytest>=6.0.0',
        'pytest-cov>=2.12.0',
    ],
}

setup(
    name="feature-benchmark",
    version="1.0.0",
    description="Benchmark of keypoint detector and descriptor combinations for camera tracking",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=['FeatureBenchmark', 'FeatureBenchmark.*']),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Image Processing",
    ],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    include_package_data=True,
    package_data={
        'FeatureBenchmark': [
            '*.json'
        ]
    },
    entry_points={
        'console_scripts': [
            'feature-benchmark=FeatureBenchmark.cli:main',
        ],
    },
    keywords=[
        "computer vision",
        "feature detection",
        "feature matching",
        "keypoint descriptors",
        "opencv",
    ],
)
