from setuptools import setup, find_packages


def parse_requirements(file):
    try:
        with open(file) as fh:
            return [r.strip("\n") for r in fh.readlines() if not r.startswith("--")]
    except FileNotFoundError:
        return ""


def read_file_or_empty_str(file, comment_tag=None):
    try:
        with open(file) as fh:
            if comment_tag is not None:
                return "\n".join(
                    r.strip("\n") for r in fh.readlines() if not r.startswith(comment_tag)
                )
            return fh.read()
    except FileNotFoundError:
        return ""


README = read_file_or_empty_str("README.md")
VERSION = read_file_or_empty_str("VERSION", comment_tag="#").strip()

REQUIREMENTS = parse_requirements("requirements.txt")
EXTRA_REQUIREMENTS = {
    "dev": parse_requirements("requirements-dev.txt"),
}

MODEL_PATH = "drainage_control_core.models"
setup(
    name="drainage-control-core",
    version=VERSION,
    description="Rule based control of drainage network links",
    long_description=README,
    long_description_content_type="text/markdown",
    entry_points={
        "console_scripts": [
            "drainage-controls = drainage_control_core.cli:main",
        ],
        "drainage.models": [
            f"controls = {MODEL_PATH}.controls.model:Model",
        ],
    },
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    python_requires=">=3.9",
    install_requires=REQUIREMENTS,
    extras_require=EXTRA_REQUIREMENTS,
    include_package_data=True,
    package_data={
        "drainage_control_core.json_schemas": ["*", "models/*"],
    },
)
