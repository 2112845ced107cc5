import os
from pathlib import Path

import pytest
from conftest import MP4

import mediaweb.pages
from mediaweb.config import DOWNLOAD_PREFIX
from mediaweb.errors import ClassificationError, Unreadable
from mediaweb.pages import DirEntry, listEntries, renderListing, renderMediaPage
from mediaweb.paths import decode, resolve
from mediaweb.sniffing import UNKNOWN, classify


def test_list_complete(media: Path):
	entries = listEntries(str(media), "/")
	assert [_.name for _ in entries] == sorted(os.listdir(media))


def test_list_navigable(media: Path):
	entries = {_.name: _ for _ in listEntries(str(media), "/")}
	assert entries["movies"] == DirEntry("movies", True, "directory", "/movies")
	assert entries["empty"].navigable
	assert entries["disguised.txt"].navigable
	assert entries["disguised.txt"].type == "mp4"
	# Images, text and unknown content are listed, without a link
	assert entries["cover.png"] == DirEntry("cover.png", False, "png", None)
	assert entries["notes.txt"] == DirEntry("notes.txt", False, "unknown", None)
	assert entries["fake.mp4"] == DirEntry("fake.mp4", False, "unknown", None)


def test_list_nested(media: Path):
	entries = {_.name: _ for _ in listEntries(str(media / "movies"), "movies/")}
	assert entries["clip.mp4"].href == "/movies/clip.mp4"
	assert entries["trailer.webm"].href == "/movies/trailer.webm"
	assert entries["my clip.mp4"].href == "/movies/my%20clip.mp4"


def test_list_links_resolve(media: Path):
	# Following a link from a listing leads to the listed child
	for directory, request in ((media, "/"), (media / "movies", "/movies")):
		for entry in listEntries(str(directory), request):
			if entry.href:
				assert resolve(str(media), decode(entry.href)) == str(
					directory / entry.name
				)


def test_list_empty(media: Path):
	assert listEntries(str(media / "empty"), "/empty") == []


def test_list_errors(media: Path, monkeypatch):
	def failing(path: str):
		raise ClassificationError(f"Could not read {path}")

	with pytest.raises(Unreadable) as error:
		listEntries(str(media / "missing"), "/missing")
	assert error.value.status == 500
	# A file that can't be read aborts the whole listing
	monkeypatch.setattr(mediaweb.pages, "classify", failing)
	with pytest.raises(ClassificationError):
		listEntries(str(media), "/")


def test_list_special_files(media: Path):
	# Only regular files are opened to be classified
	os.symlink(media / "nowhere", media / "dangling")
	os.mkfifo(media / "pipe")
	entries = {_.name: _ for _ in listEntries(str(media), "/")}
	assert entries["dangling"] == DirEntry("dangling", False, "unknown", None)
	assert entries["pipe"] == DirEntry("pipe", False, "unknown", None)


def test_list_escaping_links(media: Path, outside: Path):
	os.symlink(outside / "movie.mp4", media / "leak.mp4")
	os.symlink(outside, media / "secretdir")
	os.symlink(media / "movies" / "clip.mp4", media / "shortcut.mp4")
	root = os.path.realpath(media)
	entries = {_.name: _ for _ in listEntries(str(media), "/", root=root)}
	assert entries["leak.mp4"] == DirEntry("leak.mp4", False, "unknown", None)
	assert entries["secretdir"] == DirEntry("secretdir", False, "unknown", None)
	# Links within the root are listed as their target
	assert entries["shortcut.mp4"] == DirEntry(
		"shortcut.mp4", True, "mp4", "/shortcut.mp4"
	)


def test_list_undecodable(media: Path):
	with open(os.fsencode(media / "movies") + b"/\xff.mp4", "wb") as f:
		f.write(MP4)
	entries = {_.name: _ for _ in listEntries(str(media / "movies"), "movies")}
	entry = entries["\ufffd.mp4"]
	assert entry.href == "/movies/%FF.mp4"
	assert resolve(str(media), decode(entry.href)) == os.fsdecode(
		os.fsencode(media / "movies") + b"/\xff.mp4"
	)
	page = renderListing(str(media / "movies"), list(entries.values()), "movies")
	assert '<a href="/movies/%FF.mp4">\ufffd.mp4</a>' in page


def test_render_listing(media: Path):
	entries = listEntries(str(media), "/")
	page = renderListing(str(media), entries, "/")
	assert page.startswith("<!DOCTYPE html>")
	assert f"<title>{media}</title>" in page
	assert page.count("<li>") == len(entries)
	assert '<a href="/movies">movies/</a>' in page
	assert '<a href="/disguised.txt">disguised.txt</a>' in page
	assert "<li>notes.txt<span" in page
	assert 'href="/notes.txt"' not in page
	assert "xx-large" in page
	# No parent link at the root
	assert 'href="/"' not in page


def test_render_listing_parent(media: Path):
	page = renderListing(
		str(media / "movies"), listEntries(str(media / "movies"), "movies/"), "movies/"
	)
	assert '<a href="/">..</a>' in page
	assert page.count("<li>") == 3


def test_render_listing_escapes(tmp_path: Path):
	page = renderListing(
		str(tmp_path), [DirEntry("<b>.txt", False, "unknown", None)], "/"
	)
	assert "&lt;b&gt;.txt" in page
	assert "<b>" not in page


def test_render_media_page(media: Path):
	path = media / "movies" / "clip.mp4"
	page = renderMediaPage(str(path), "movies/clip.mp4")
	assert "<video" in page
	assert " controls" in page
	assert 'data-setup="{}"' in page
	assert f'<source src="{DOWNLOAD_PREFIX}/movies/clip.mp4" type="video/mp4">' in page
	assert "<title>clip.mp4</title>" in page


def test_render_media_page_any_file(media: Path):
	# Any file gets a player, with an empty type when not recognized
	page = renderMediaPage(str(media / "notes.txt"), "/notes.txt", UNKNOWN)
	assert f'<source src="{DOWNLOAD_PREFIX}/notes.txt" type="">' in page
	page = renderMediaPage(
		str(media / "cover.png"), "/cover.png", classify(str(media / "cover.png"))
	)
	assert 'type="image/png"' in page


def test_render_media_page_quoted(media: Path):
	page = renderMediaPage(str(media / "movies" / "my clip.mp4"), "movies/my clip.mp4")
	assert f'src="{DOWNLOAD_PREFIX}/movies/my%20clip.mp4"' in page


# EOF
