from pathlib import Path

import setuptools


def load_requirements(filename: str) -> list[str]:
    requirements = []
    for line in Path(__file__).with_name(filename).read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        requirements.append(stripped)
    return requirements


setuptools.setup(
    name="deck_combo_odds",
    version="0.2",
    author="yochi",
    author_email="pedrogush@gmail.com",
    description="Exact combo draw probabilities for card game decks",
    packages=["combo_engine", "services", "utils", "utils.constants"],
    classifiers=["Programming Language :: Python :: 3", "Operating System :: OS Independent"],
    python_requires=">=3.11",
    install_requires=load_requirements("requirements.txt"),
    extras_require={"test": ["pytest"]},
)
