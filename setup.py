from pathlib import Path

from setuptools import find_packages, setup

BASE_DIR = Path(__file__).parent
README = (BASE_DIR / "README.md").read_text(encoding="utf-8")

setup(
    name="osinfo-service",
    version="0.1.0",
    description="FastAPI service that exposes host statistics and request telemetry.",
    long_description=README,
    long_description_content_type="text/markdown",
    author="Monitoring Stack",
    packages=find_packages(include=["osinfo", "osinfo.*"]),
    python_requires=">=3.10",
    include_package_data=True,
    package_data={"osinfo": ["templates/*.html", "static/*"]},
    install_requires=[
        "fastapi>=0.115.0",
        "uvicorn[standard]>=0.32.0",
        "psutil>=5.9.0",
        "jinja2>=3.1.0",
        "prometheus-client>=0.20.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "osinfo-service=osinfo.main:main",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
