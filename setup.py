#!/usr/bin/env python3
from __future__ import annotations

import re
import setuptools
import pathlib
import sys
import toml

__minver__ = '3.10'
__github__ = 'https://github.com/z85kit/z85kit/'
__gitraw__ = 'https://raw.githubusercontent.com/z85kit/z85kit/'
__author__ = 'z85kit contributors'
__slogan__ = 'Z85 encoding and decoding: strict, padded, validated and unchecked.'
__topics__ = [
    'Development Status :: 4 - Beta',
    'Operating System :: OS Independent',
    'Programming Language :: Python :: 3 :: Only',
    'Topic :: Communications',
    'Topic :: Utilities',
]
__buildtools__ = {'setuptools', 'wheel', 'toml'}


def get_config():
    sys.path.insert(0, str(pathlib.Path(__file__).parent.absolute()))

    import z85kit

    def get_setup_readme(filename: str | pathlib.Path | None = None):
        if filename is None:
            filename = pathlib.Path(__file__).parent.joinpath('README.md')
        with open(filename, 'r', encoding='UTF8') as README:
            def complete_link(match):
                link: str = match[1]
                if any(link.lower().endswith(xt) for xt in ('jpg', 'gif', 'png', 'svg')):
                    return F'({__gitraw__}master/{link})'
                else:
                    return F'({__github__}blob/master/{link})'
            readme = README.read()
            return re.sub(R'(?<=\])\((?!\w+://)(.*?)\)', complete_link, readme)

    def requirement_name(requirement: str):
        return re.split('[<>=!~;\\s\\[]', requirement, maxsplit=1)[0].lower()

    with z85kit.__unit_loader__ as ldr:
        ldr.reload()
        console_scripts = [
            F'{name}={path}:{name}.run' for name, path in ldr.units.items()
        ]

    ppcfg: dict[str, dict[str, list[str]]] = toml.load('pyproject.toml')
    requirements = [
        requirement for requirement in ppcfg['build-system']['requires']
        if requirement_name(requirement) not in __buildtools__
    ]

    return dict(
        name=z85kit.__distribution__,
        version=z85kit.__version__,
        long_description=get_setup_readme(),
        long_description_content_type='text/markdown',
        author=__author__,
        description=__slogan__,
        url=__github__,
        python_requires=F'>={__minver__}',
        classifiers=__topics__,
        packages=setuptools.find_packages(include=('z85kit*',)),
        install_requires=requirements,
        extras_require={'test': ['pytest']},
        entry_points={'console_scripts': console_scripts},
    )


if __name__ == '__main__':
    setuptools.setup(**get_config())
