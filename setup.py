import os
import pathlib

import setuptools


def local_file(name: str) -> str:
    """Interpret filename as relative to this file."""
    return os.path.relpath(os.path.join(os.path.dirname(__file__), name))


SOURCE = local_file("src")
README = local_file("README.md")

with open(local_file("src/openapi_transformers/__init__.py")) as o:
    for line in o:
        if line.startswith("__version__"):
            _, __version__, _ = line.split('"')


setuptools.setup(
    name="openapi-transformers",
    version=__version__,
    packages=setuptools.find_packages(SOURCE),
    package_dir={"": SOURCE},
    package_data={"": ["py.typed"]},
    description="Merge allOf, anyOf and oneOf schemas in OpenAPI documents",
    zip_safe=False,
    install_requires=["jsonschema>=4.18.0", "typer>=0.9"],
    extras_require={"test": ["pytest", "hypothesis>=6.84.3"]},
    entry_points={
        "console_scripts": ["openapi-transformers=openapi_transformers._cli:app"]
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Typing :: Typed",
    ],
    long_description=pathlib.Path(README).read_text(),
    long_description_content_type="text/markdown",
    keywords="python openapi swagger json-schema allof anyof oneof",
)
