from .maze.console import main

main()
