from auto_filename.cli.app import main

main()
