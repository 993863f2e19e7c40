from setuptools import find_packages, setup

setup(
    name="portability-copier",
    version="0.1.0",
    description="Resumable copy engine for moving user data between online services",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=["Pillow>=10.0", "piexif>=1.1", "pillow-heif>=0.13"],
    extras_require={"test": ["pytest>=7.0"]},
)
