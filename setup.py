#!/usr/bin/env python3
# this project is licensed under the WTFPLv2, see COPYING.txt for details

import glob

from setuptools import setup, find_packages


if __name__ == '__main__':
	setup(
		name='eolmark',
		version='0.3.0',
		description='Trailing newline marker for QScintilla editors',
		license='WTFPLv2',
		python_requires='>=3.10',
		packages=find_packages(include=['eolmark', 'eolmark.*']),
		install_requires=[
			'PyQt5',
			'QScintilla',
			'pyxdg',
		],
		extras_require={
			'test': ['pytest'],
		},
		entry_points={
			'gui_scripts': [
				'eolmark=eolmark.app:main',
			],
		},
		data_files=[
			('share/eolmark/sample_conf', glob.glob('data/sample_conf/*')),
		],
	)
