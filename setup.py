"""
jsonnlp setup: jsonnlp is a library for reading and writing JSON-NLP,
an interchange format for natural language processing annotations
"""

from setuptools import setup, find_packages
import glob
import os

REQS = [
    'frozendict',
    'nltk >= 3.0.0',
    'tabulate',
]


setup(name='jsonnlp',
      version='0.0.4',
      description='Read and write JSON-NLP annotations',
      packages=find_packages(),
      scripts=[f for f in glob.glob('scripts/*') if not os.path.isdir(f)],
      python_requires='>=3.7',
      install_requires=REQS,
      extras_require={'test': ['pytest']})
