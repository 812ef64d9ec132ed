from crooksfield.cli import main

main()
