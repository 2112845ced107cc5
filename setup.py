from setuptools import find_packages, setup

VERSION = "1.0.0"


def readme():
	with open("README.md", "r", encoding="utf-8") as fh:
		return fh.read()


setup(
	name="mediaweb",
	version=VERSION,
	description="A web server for media files: directory listings, a video player page and raw downloads",
	long_description=readme(),
	long_description_content_type="text/markdown",
	packages=find_packages(where="src/py"),
	package_dir={"": "src/py"},
	classifiers=[
		"Development Status :: 4 - Beta",
		"Intended Audience :: End Users/Desktop",
		"License :: OSI Approved :: MIT License",
		"Operating System :: POSIX :: Linux",
		"Programming Language :: Python :: 3",
		"Programming Language :: Python :: 3.11",
		"Programming Language :: Python :: 3.12",
		"Topic :: Internet :: WWW/HTTP :: HTTP Servers",
		"Topic :: Multimedia :: Video",
	],
	python_requires=">=3.11",
	install_requires=[
		"extra-http>=1.1.2,<1.2",
		"filetype",
	],
	extras_require={
		"dev": [
			"mypy",
			"flake8",
			"bandit",
		],
		"test": [
			"pytest",
		],
	},
	entry_points={
		"console_scripts": [
			"mediaweb=mediaweb.__main__:cli",
		],
	},
	include_package_data=True,
	zip_safe=False,
)
