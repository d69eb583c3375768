"""Shared test fixtures for Strata: C++ snippets and a small on-disk corpus."""

import pytest

from strata.scanning.extractor import FileExtractor

RENDERER_H = """\
#include <memory>
#include "Canvas.h"

class IRenderer {
public:
    virtual ~IRenderer() {}
    virtual void draw(const Canvas& canvas) = 0;
};
"""

CANVAS_H = """\
#include <vector>

class Canvas {
public:
    Canvas() : width(0) {}
    int area() const {
        int total = 0;
        for (int i = 0; i < width; ++i) {
            total += i;
        }
        return total;
    }
    void clear() {
        std::vector<int> pixels;
        GooList::reset();
        if (width > 0) {
            width = 0;
        }
    }
private:
    int width;
};
"""

PIXELMAP_CPP = """\
#include "Canvas.h"

class PixelMapImpl : public PixelMap {
public:
    void render(Canvas& canvas) {
        canvas.clear();
    }
};
"""

GOOLIST_H = """\
class GooList {
public:
    int size() const { return count; }
    static void reset() { }
private:
    int count;
};
"""

GENERATED_H = """\
// Generated by tablegen, do not edit
class Table {
public:
    int lookup(int k) { return k; }
};
"""

MAIN_CPP = """\
#include "Canvas.h"

int main() {
    Canvas canvas;
    while (canvas.area() > 0) {
        canvas.clear();
    }
    return 0;
}
"""


@pytest.fixture
def extractor():
    """FileExtractor with default configuration."""
    return FileExtractor()


@pytest.fixture
def corpus(tmp_path):
    """A small C++ tree: interface, core, derived, utility, generated and entity-less files."""
    files = {
        "include/Renderer.h": RENDERER_H,
        "include/Canvas.h": CANVAS_H,
        "src/PixelMap.cpp": PIXELMAP_CPP,
        "src/GooList.h": GOOLIST_H,
        "src/Generated.h": GENERATED_H,
        "src/main.cpp": MAIN_CPP,
        "README.md": "not a source file\n",
    }
    for rel, content in files.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path
