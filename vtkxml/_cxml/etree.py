# A minimal element tree for writing VTK XML files. Unlike xml.etree, elements can
# carry a `text_writer` which streams its content straight into the (binary) output
# file. This is how the raw appended data section ends up in the file without being
# converted to a string first.
from xml.sax.saxutils import escape, quoteattr


class Element:
    def __init__(self, name, **kwargs):
        self.name = name
        self.attrib = {key: str(value) for key, value in kwargs.items()}
        self._children = []
        self.text = None
        self.text_writer = None

    def __iter__(self):
        return iter(self._children)

    def __len__(self):
        return len(self._children)

    def insert(self, pos, elem):
        self._children.insert(pos, elem)

    def remove(self, elem):
        self._children.remove(elem)

    def set(self, key, value):
        self.attrib[key] = str(value)

    def get(self, key, default=None):
        return self.attrib.get(key, default)

    def find(self, name):
        for child in self._children:
            if isinstance(child, Element) and child.name == name:
                return child
        return None

    def findall(self, name):
        return [
            child
            for child in self._children
            if isinstance(child, Element) and child.name == name
        ]

    def write(self, f):
        kw_list = [f"{key}={quoteattr(value)}" for key, value in self.attrib.items()]
        f.write("<{}>\n".format(" ".join([self.name] + kw_list)).encode())
        if self.text:
            f.write(escape(self.text).encode())
            f.write(b"\n")
        if self.text_writer:
            self.text_writer(f)
            f.write(b"\n")
        for child in self._children:
            child.write(f)
        f.write(f"</{self.name}>\n".encode())


class SubElement(Element):
    def __init__(self, parent, name, **kwargs):
        super().__init__(name, **kwargs)
        parent._children.append(self)


class Comment:
    def __init__(self, text):
        self.text = text

    def write(self, f):
        f.write(f"<!--{self.text}-->\n".encode())


class ElementTree:
    def __init__(self, root):
        self.root = root

    def write(self, filename, xml_declaration=True):
        with open(filename, "wb") as f:
            if xml_declaration:
                f.write(b'<?xml version="1.0"?>\n')
            self.root.write(f)
