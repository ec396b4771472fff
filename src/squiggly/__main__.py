from squiggly.cli import main

main()
