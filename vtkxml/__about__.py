__version__ = "0.3.0"
__author__ = "vtkxml developers"
__author_email__ = "vtkxml@users.noreply.github.com"
__website__ = "https://github.com/vtkxml/vtkxml"
__license__ = "License :: OSI Approved :: MIT License"
__status__ = "Development Status :: 4 - Beta"
