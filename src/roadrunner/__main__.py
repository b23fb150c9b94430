from roadrunner.cli import main

main()
