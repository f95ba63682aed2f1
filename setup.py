from setuptools import setup, find_packages

setup(
    name='bvh_motion',
    version='0.1.0',
    description='BVH motion capture import and forward kinematics',
    packages=find_packages(include=['bvh_motion', 'bvh_motion.*']),
    python_requires='>=3.10',
    install_requires=[
        'numpy',
        'scipy>=1.14',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
